"""
HVAC service console.

Server-rendered admin console for managing customers, technicians and jobs
against the scheduling REST backend.
"""
