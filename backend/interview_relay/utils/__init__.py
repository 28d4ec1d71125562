from interview_relay.utils.deltas import extract_delta_content, extract_message_content
from interview_relay.utils.sse import SSEFrameDecoder, encode_fragment

__all__ = ["SSEFrameDecoder", "encode_fragment", "extract_delta_content", "extract_message_content"]
