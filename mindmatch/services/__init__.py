"""Services module - business logic over the record stores."""
