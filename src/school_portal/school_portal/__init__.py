"""School Portal package.

This package is organized by feature modules (leaves, fees, ...) with a thin
Flask controller layer over service and entity-store layers.
"""
