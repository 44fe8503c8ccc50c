"""Services package — all business logic lives here, never in routers.

Files:
  osha_rates.py      — pure TRIR / DART / LTIR / severity calculator
  incidents.py       — incident registration, root cause analysis, closure
  osha.py            — recordable incidents and the yearly 300A log
  reminders.py       — reminder fan-out, cancellation and the cron dispatcher
  mailer.py          — Resend email sender
  sms.py             — SMS sender (Link Mobility, IntelliSMS, ProSMS, mock)
  events.py          — meetings, inspections, audits, measures (reminder-bearing)
  chemicals.py       — chemical inventory CRUD
  sds_matching.py    — pure attachment-to-chemical scoring heuristic
  sds_parser.py      — SDS PDF extraction (pdfplumber, PyMuPDF, regex fallback)
  openai_service.py  — OpenAI SDS extraction (text and vision)
  email_monitor.py   — Office 365 SDS mailbox via Microsoft Graph
  sds_inbox.py       — match, parse and apply SDS emails for one tenant
  environment.py     — ISO 14001 aspects and measurements
  workers_comp.py    — workers' comp claims, EMR history, summary
  users.py           — per-user notification settings

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
