"""Appointment booking service: slots, provider notifications and cancellation mail."""
