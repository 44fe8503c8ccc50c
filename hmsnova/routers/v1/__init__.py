"""v1 router package — all /api/v1/* endpoints live here.

Files:
  incidents.py     — incident registration, investigation, closure, stats
  osha.py          — rates, recordable incidents, 300A logs
  reminders.py     — reminder fan-out / cancel / list, cron dispatch
  activities.py    — meetings, inspections, audits, measures
  chemicals.py     — chemical inventory, SDS match and inbox processing
  environment.py   — environmental aspects and measurements
  workers_comp.py  — claims, EMR, summary
  users.py         — per-user notification settings

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to hmsnova/services/.
"""
