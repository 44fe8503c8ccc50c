"""Repositories package — every SQLAlchemy query lives here.

Files:
  base.py          — BaseRepository: tenant-scoped CRUD + pagination
  events.py        — Meeting / Inspection / Audit / Measure
  reminder.py      — ScheduledReminder (+ cross-tenant due query for the dispatcher)
  incident.py      — Incident, OshaLog
  chemical.py      — Chemical inventory
  environment.py   — EnvironmentalAspect, EnvironmentalMeasurement
  workers_comp.py  — WorkersCompClaim, EmrHistory
  tenant.py        — Tenant, User membership lookups
"""
