"""WebSocket close codes used by the notification socket."""

# RFC 6455 policy violation: the first frame was not a valid registration.
WS_CLOSE_INVALID_REGISTRATION = 1008

# RFC 6455 going away: the server is shutting down.
WS_CLOSE_GOING_AWAY = 1001

# Application-defined: no registration arrived before the handshake deadline.
WS_CLOSE_HANDSHAKE_TIMEOUT = 4408

# RFC 6455 internal error: the server hit an unexpected failure on the socket.
WS_CLOSE_INTERNAL_ERROR = 1011
