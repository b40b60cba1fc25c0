"""
Socket.IO event names.

Login success and the history/channel replies reuse the request's event name,
so several S2C names equal their C2S counterparts.
"""


class C2SEvent:
    LOGIN = "/login"
    REGISTER = "/register"
    MESSAGE = "/message"
    GET_MESSAGES = "/get-messages"
    GET_CHANNELS = "/get-channels"


class S2CEvent:
    LOGIN_FAILED = "/failed-login"
    # Server-side spelling.
    REGISTER_FAILED = "/failed-registeration"
    LOGIN_SUCCESS = "/login"
    MESSAGE = "/message"
    MESSAGES_BATCH = "/get-messages"
    CHANNELS_LIST = "/get-channels"
