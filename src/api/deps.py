from ..core.config import settings
from ..services.vision_parser import VisionParserRelay


def get_relay() -> VisionParserRelay:
    """Build the relay from current settings; override in tests via app.dependency_overrides."""
    return VisionParserRelay(
        api_key=settings.vision_parser_api_key,
        endpoint=settings.vision_parser_api_url,
        verify_tls=settings.vision_parser_verify_tls,
        timeout=settings.vision_parser_timeout,
    )
