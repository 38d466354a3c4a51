"""CLI entry point for the face ID login demo.

Usage:
    faceid register NAME [--no-camera]
    faceid list
    faceid scan [--image PATH] [--no-camera] [--fail-open] [--no-redirect]
    faceid detect --image PATH [--output PATH]
    faceid serve [--host HOST] [--port PORT]
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .auth import StatusEvent, UnavailablePolicy, browser_redirect
from .constants import Config, get_config, load_config
from .members import JsonFileStorage, MemberStore
from .session import FaceIdSession

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

STATUS_MARKS = {
    "info": " ",
    "success": "✓",
    "warning": "!",
    "error": "✗",
}


def print_status(event: StatusEvent):
    """Print a status event on its own line."""
    print(f"{STATUS_MARKS.get(event.level, ' ')} {event.message}")


def resolve_config(args) -> Config:
    """Configuration from --config, or the global one."""
    if args.config:
        path = Path(args.config)
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
        return Config.from_dict(load_config(path))
    return get_config()


def cmd_register(args):
    """Register a member."""
    config = resolve_config(args)
    session = FaceIdSession.from_config(config, use_camera=not args.no_camera)
    session.registration.add_listener(print_status)

    try:
        session.open_registration()
        record = asyncio.run(session.register(args.name))
    finally:
        session.close()

    if record is None:
        sys.exit(1)

    logger.info(f"✓ Registered {record.name} (id={record.id})")


def cmd_list(args):
    """List registered members in registration order."""
    config = resolve_config(args)
    store = MemberStore(
        JsonFileStorage(config.storage.path),
        key=config.storage.members_key,
    )

    members = store.list()
    if not members:
        print("No registered members.")
        return

    for i, member in enumerate(members, 1):
        print(f"  [{i}] {member.name}  id={member.id}  registered={member.registered_at}")
    print(f"Total: {len(members)}")


def cmd_scan(args):
    """Run a scan with camera frames, a still image or no frames."""
    config = resolve_config(args)

    image = None
    if args.image:
        import cv2

        image = cv2.imread(args.image)
        if image is None:
            logger.error(f"Could not load: {args.image}")
            sys.exit(1)

    session = FaceIdSession.from_config(
        config,
        use_camera=not (args.no_camera or args.image),
        policy=UnavailablePolicy.FAIL_OPEN if args.fail_open else None,
        redirect_handler=None if args.no_redirect else browser_redirect,
    )
    session.scan_flow.add_listener(print_status)

    try:
        if not session.start():
            sys.exit(1)
        result = asyncio.run(session.scan_flow.scan(frame=image))
    finally:
        session.close()

    if result is None or not result.granted:
        sys.exit(1)

    if result.redirect_url and args.no_redirect:
        logger.info(f"Redirect target: {result.redirect_url}")


def cmd_detect(args):
    """Run face detection on an image."""
    import cv2

    from .detection import SignalDetector

    config = resolve_config(args)
    detection = config.detection
    detector = SignalDetector(detection.backend, **detection.backend_kwargs())
    logger.info(f"Using {detection.backend} backend")

    image = cv2.imread(args.image)
    if image is None:
        logger.error(f"Could not load: {args.image}")
        sys.exit(1)

    signal = detector.probe(image)
    faces = detector.detect_faces(image)
    logger.info(f"Face signal: {signal.value}, {len(faces)} face(s)")

    for i, face in enumerate(faces):
        x, y, w, h = face.bbox
        logger.info(f"  [{i+1}] pos=({x},{y}) size={w}x{h}")

    if args.output:
        output = detector.draw_detections(image, faces)
        cv2.imwrite(args.output, output)
        logger.info(f"Saved: {args.output}")


def cmd_serve(args):
    """Start the HTTP API."""
    config = resolve_config(args)

    try:
        import uvicorn

        from .api import create_app
    except ImportError as e:
        logger.error(f"Missing dependency: {e}")
        logger.info("Run: pip install -r requirements.txt")
        sys.exit(1)

    session = FaceIdSession.from_config(config, use_camera=False)
    session.start()
    app = create_app(session)

    host = args.host or config.api.host
    port = args.port or config.api.port
    logger.info(f"API: http://{host}:{port}")
    logger.info(f"Docs: http://{host}:{port}/docs")

    uvicorn.run(app, host=host, port=port, log_level="warning")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="faceid",
        description="Simulated face ID login demo",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  faceid register "Ada"               Register a member
  faceid list                         List members
  faceid scan                         Scan with the camera
  faceid scan -i face.jpg             Scan a still image
  faceid scan --no-camera --fail-open Demo scan without a camera
  faceid serve --port 8000            Start the HTTP API
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-c", "--config", default=None, help="Config file")
    parser.add_argument("-d", "--debug", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # register
    register_p = subparsers.add_parser("register", help="Register a member")
    register_p.add_argument("name", help="Member display name")
    register_p.add_argument("--no-camera", action="store_true",
                            help="Do not open the registration camera")

    # list
    subparsers.add_parser("list", help="List members")

    # scan
    scan_p = subparsers.add_parser("scan", help="Run a face scan")
    scan_p.add_argument("-i", "--image", help="Scan a still image instead of the camera")
    scan_p.add_argument("--no-camera", action="store_true", help="Scan without frames")
    scan_p.add_argument("--fail-open", action="store_true",
                        help="Treat an unavailable detector as a detected face")
    scan_p.add_argument("--no-redirect", action="store_true",
                        help="Do not open the redirect URL on success")

    # detect
    detect_p = subparsers.add_parser("detect", help="Face detection on an image")
    detect_p.add_argument("-i", "--image", required=True, help="Image file")
    detect_p.add_argument("-o", "--output", help="Output file")

    # serve
    serve_p = subparsers.add_parser("serve", help="Start the HTTP API")
    serve_p.add_argument("--host", default=None, help="Bind host")
    serve_p.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def main(argv: Optional[List[str]] = None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    commands = {
        "register": cmd_register,
        "list": cmd_list,
        "scan": cmd_scan,
        "detect": cmd_detect,
        "serve": cmd_serve,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
