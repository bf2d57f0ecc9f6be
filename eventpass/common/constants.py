# constantes compartidas por los modulos de la aplicacion
ALGO_SHA256 = "SHA-256"  # digest de los tickets QR

# orden fijo de los campos firmados del ticket (nombre en el JSON)
TOKEN_PAYLOAD_FIELDS = ("registrationId", "eventId", "userId", "ticketNumber", "quantity", "timestamp")
TOKEN_HASH_FIELD = "hash"
TOKEN_STRING_FIELDS = ("registrationId", "eventId", "userId", "ticketNumber")
TOKEN_INT_FIELDS = ("quantity", "timestamp")
TOKEN_HASH_HEX_LENGTH = 64

# roles de usuario
ROLE_ATTENDEE = "ATTENDEE"
ROLE_ORGANIZER = "ORGANIZER"
ROLE_ADMIN = "ADMIN"
USER_ROLES = (ROLE_ADMIN, ROLE_ORGANIZER, ROLE_ATTENDEE)

# estados de evento
EVENT_DRAFT = "DRAFT"
EVENT_PUBLISHED = "PUBLISHED"
EVENT_CANCELLED = "CANCELLED"
EVENT_COMPLETED = "COMPLETED"
EVENT_STATUSES = (EVENT_DRAFT, EVENT_PUBLISHED, EVENT_CANCELLED, EVENT_COMPLETED)

# estados de registro y de pago
REGISTRATION_PENDING = "PENDING"
REGISTRATION_CONFIRMED = "CONFIRMED"
REGISTRATION_CANCELLED = "CANCELLED"
PAYMENT_PENDING = "PENDING"
PAYMENT_COMPLETED = "COMPLETED"

# acciones del historial de check-in
ACTION_CHECK_IN = "CHECK_IN"
ACTION_CHECK_IN_UNDO = "CHECK_IN_UNDO"
ACTION_BULK_CHECK_IN = "BULK_CHECK_IN"
ACTION_CURRENT_CHECK_IN = "CURRENT_CHECK_IN"
