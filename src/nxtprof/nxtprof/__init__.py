"""NxtProf operations backend.

This package is organized by feature modules (sessions, attendance, learning,
sync, ...) with a thin Flask controller layer over service/repository layers.
"""
