"""Internal constants shared across the library."""

BASE_URL = "http://localhost:8080/VehicleMate-Backend"
USER_AGENT = "vehiclemate/1"

SYNC_ENDPOINT = "/syncVehicleData"
LOGIN_ENDPOINT = "/login"

#: Storage key holding the current identity (see :mod:`vehiclemate.session`).
USER_KEY = "user"

#: Expiries further away than this many days produce no reminder.
REMINDER_WINDOW_DAYS = 30

DEFAULT_EXPENSE_CATEGORY = "General"

DEFAULT_CURRENCY = "LKR"
