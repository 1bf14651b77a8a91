"""HTTP API for uploading time reports and reading the payroll report."""
