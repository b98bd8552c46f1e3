"""Content-addressed file uploads to the Now files API."""
