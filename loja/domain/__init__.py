"""Domain records and input validation, free of storage/HTTP concerns."""
