from portal.realtime.connection import FrameError, RealtimeConnection, decode_frame, encode_frame
from portal.realtime.context import RealtimeContext, build_realtime_context, get_realtime
from portal.realtime.registry import ConnectionRegistry, identity_key
from portal.realtime.relay import RealtimeRelay

__all__ = [
    'ConnectionRegistry',
    'FrameError',
    'RealtimeConnection',
    'RealtimeContext',
    'RealtimeRelay',
    'build_realtime_context',
    'decode_frame',
    'encode_frame',
    'get_realtime',
    'identity_key',
]
