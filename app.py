"""
Main application for the Dispute Draft service
"""
import socket
import sys

from dotenv import load_dotenv

from utils.config import Settings
from utils.errors import ConfigurationError
from utils.logging_config import init_logging, get_logger, console_print

load_dotenv()

init_logging()
logger = get_logger('app')

def is_port_in_use(port: int, host: str = '127.0.0.1') -> bool:
    """
    Check if a port is already in use

    Args:
        port: Port number to check
        host: Host to check (default: 127.0.0.1)

    Returns:
        True if port is in use, False otherwise
    """
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.settimeout(1)
            return sock.connect_ex((host, port)) == 0
    except OSError:
        return False

def load_settings() -> Settings:
    """
    Read configuration, exiting the process when a required setting is missing
    """
    try:
        return Settings.from_env()
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        console_print(str(e), "ERROR")
        sys.exit(1)

def start_api_server():
    """
    Start the FastAPI server
    """
    import uvicorn

    settings = load_settings()
    host = settings.api_host
    port = settings.api_port

    if is_port_in_use(port):
        console_print(f"API server is already running on port {port}", "WARNING")
        logger.warning(f"API server is already running on port {port}")
        return

    logger.info("Available endpoints:")
    logger.info("   GET  /health - Health check")
    logger.info("   GET  /llm/health - Draft generation health")
    logger.info("   GET  /connect/stripe - Link a Stripe account")
    logger.info("   GET  /connect/stripe/callback - OAuth callback")
    logger.info("   POST /webhooks/stripe - Stripe webhook receiver")
    logger.info("   GET  /cases - List disputes")
    logger.info("   POST /cases/{dispute_id}/submit - Submit draft as evidence")

    console_print(f"Dispute draft backend listening on http://localhost:{port}", "SUCCESS")
    console_print(f"Connect a merchant at http://localhost:{port}/connect/stripe", "INFO")
    console_print(f"Set your Stripe webhook to POST http://localhost:{port}/webhooks/stripe", "INFO")

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host=host,
        port=port,
        log_level="info"
    )

def print_usage():
    """
    Print usage information
    """
    console_print("Usage:", "INFO")
    console_print("  python app.py          - Start the API server", "INFO")
    console_print("  python app.py --help   - Show this help message", "INFO")

if __name__ == "__main__":
    if len(sys.argv) > 1 and sys.argv[1] in ['--help', '-h']:
        print_usage()
    else:
        start_api_server()
