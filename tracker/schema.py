SCHEMA_SQL = r"""
-- No FOREIGN KEY clauses: deleting a branch or executive never cascades,
-- orphaned ids are rendered as "Unknown" by the lookups.

-- Branches
CREATE TABLE IF NOT EXISTS branches (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  name TEXT NOT NULL,
  manager_email TEXT NOT NULL,           -- lower-cased, used as access key
  created_at TEXT NOT NULL               -- ISO datetime
);

-- Sales executives (one branch each)
CREATE TABLE IF NOT EXISTS executives (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  branch_id INTEGER NOT NULL,
  name TEXT NOT NULL,
  phone TEXT,
  created_at TEXT NOT NULL
);

-- Daily figures, one row per executive per day
CREATE TABLE IF NOT EXISTS daily_entries (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  branch_id INTEGER NOT NULL,
  executive_id INTEGER NOT NULL,
  entry_date TEXT NOT NULL,              -- ISO date
  target_qty INTEGER NOT NULL DEFAULT 0,
  ach_qty INTEGER NOT NULL DEFAULT 0,
  cash_qty INTEGER NOT NULL DEFAULT 0,
  remarks TEXT NOT NULL DEFAULT '',
  created_at TEXT NOT NULL,
  last_updated TEXT,

  UNIQUE (executive_id, entry_date)
);

CREATE INDEX IF NOT EXISTS ix_daily_entries_date ON daily_entries (entry_date);
CREATE INDEX IF NOT EXISTS ix_daily_entries_branch_date ON daily_entries (branch_id, entry_date);

-- Edit history (append-only)
CREATE TABLE IF NOT EXISTS entry_edits (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  entry_id INTEGER NOT NULL,
  field TEXT NOT NULL,                   -- Target / ACH / Cash
  old_value INTEGER NOT NULL,
  new_value INTEGER NOT NULL,
  edited_at TEXT NOT NULL,
  edited_by TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_entry_edits_entry ON entry_edits (entry_id);
"""
