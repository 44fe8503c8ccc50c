"""Pydantic schemas package.

Folder intent:
  common.py        — CamelModel base + HealthResponse (all schemas inherit CamelModel)
  incident.py      — incident registration, investigation and closure
  osha.py          — OSHA recordkeeping inputs, 300A log and rate outputs
  reminder.py      — reminder fan-out / dispatch payloads
  events.py        — meetings, inspections, audits, measures
  chemical.py      — chemical inventory and SDS inbox matching
  environment.py   — environmental aspects and measurements
  workers_comp.py  — claims, EMR history, summary
  user.py          — notification settings
"""
