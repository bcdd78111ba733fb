"""Document ingestion helpers built around a sandboxed command chain."""
