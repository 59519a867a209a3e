# ----------------- Literales de estado HTTP -----------------

NETWORKERROR = 0
BADREQUEST = 400
INTERNALSERVERERROR = 500

SUCCESS_RANGE = range(200, 300)

UNKNOWN_URL = "(unknown url)"
UNKNOWN_ERROR = "Unknown Error"
