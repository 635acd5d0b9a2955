"""Terminal quiz trainer drilling records from flat KEY:ANSWER; files."""
