"""Clinic workforce application.

Users, their role profiles, the identifier counters and the HTTP API
used by administrators to manage accounts.
"""
