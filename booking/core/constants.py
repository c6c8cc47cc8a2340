"""
Centralized constants for booking rules, job kinds and the worker schedule.

Change windows, page sizes or job ids here instead of scattering literals
across services and routes.
"""

# Ids and page numbers from requests must fit the INTEGER columns
MAX_DB_INT = 2**31 - 1

# Appointments
PAGE_SIZE = 20
CANCELLATION_WINDOW_HOURS = 2

# Notifications: provider mailbox shows the newest N
NOTIFICATIONS_LIMIT = 20

# Job kinds (registered in booking.services.job_handlers)
CANCELLATION_MAIL_JOB = "cancellation_mail"

# Job statuses
JOB_PENDING = "pending"
JOB_PROCESSING = "processing"
JOB_COMPLETED = "completed"
JOB_FAILED = "failed"

# Scheduler job ids (must match ids used in worker.py / main.py add_job)
JOB_WORKER_TICK_ID = "queued_jobs_tick"
JOB_WORKER_REQUEUE_ID = "queued_jobs_requeue_stale"
JOB_WORKER_REQUEUE_INTERVAL_SECONDS = 60

# Notification text per language (first part of the locale, e.g. pt_BR -> pt)
BOOKING_MESSAGES = {
    "pt": "Novo agendamento de {client_name} para o {date}",
    "en": "New booking from {client_name} for {date}",
}
CANCELLATION_SUBJECTS = {
    "pt": "Agendamento cancelado",
    "en": "Appointment canceled",
}
# CLDR patterns for a slot; other languages fall back to Babel's "medium"
SLOT_FORMATS = {
    "pt": "'dia' dd 'de' MMMM', às' H:mm'h'",
    "en": "MMMM d', at' h:mm a",
}
