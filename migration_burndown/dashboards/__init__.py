"""Dashboard data layers."""
