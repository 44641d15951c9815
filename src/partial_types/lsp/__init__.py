"""Language server for Go files using partial types."""
