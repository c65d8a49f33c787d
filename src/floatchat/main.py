# src/floatchat/main.py

import asyncio
import logging
import sys
from typing import Dict, Any, List, Optional
import argparse
import signal
from datetime import datetime

from floatchat.chat.messages import Message, MessageKind, Sender
from floatchat.chat.transcript import ChatTranscript
from floatchat.config import config
from floatchat.data.exporter import DataExporter
from floatchat.data.float_registry import FloatRegistry
from floatchat.data.mock_data import PROFILES, validate_profiles
from floatchat.nlp.query_interpreter import QueryInterpreter

logger = logging.getLogger(__name__)


class FloatChatSystem:
    """Command-line front end over the FloatChat components"""

    def __init__(self):
        self.registry: Optional[FloatRegistry] = None
        self.transcript: Optional[ChatTranscript] = None
        self.exporter: Optional[DataExporter] = None
        self.is_running = False
        self._start_time: Optional[datetime] = None

        # Register signal handlers for graceful shutdown
        signal.signal(signal.SIGINT, self._signal_handler)
        signal.signal(signal.SIGTERM, self._signal_handler)

    def initialize_system(self) -> bool:
        """Initialize all system components"""
        try:
            logger.info("Initializing FloatChat...")

            validate_profiles(PROFILES)

            self.exporter = DataExporter(prefix=config.get('export.prefix', 'argo-export'))
            self.registry = FloatRegistry()
            self.transcript = ChatTranscript(
                interpreter=QueryInterpreter(exporter=self.exporter),
                reply_delay=config.get_reply_delay(),
                cancel_superseded=bool(config.get('chat.cancel_superseded', False)),
                welcome=None
            )

            logger.info("FloatChat initialized successfully")
            return True

        except ValueError as e:
            logger.error(f"System initialization failed: {e}")
            return False

    def execute_query(self, query: str) -> List[Message]:
        """Submit a query and wait for the synthetic replies"""
        if not self.transcript:
            raise RuntimeError("System not initialized")

        logger.info(f"Executing query: '{query}'")
        self.transcript.selected_float = self.registry.selected_record
        return asyncio.run(self.transcript.submit_and_wait(query))

    def export_data(self, output_format: str = 'json') -> str:
        if not self.exporter:
            raise RuntimeError("System not initialized")

        artifact = self.exporter.export(self.registry.floats, PROFILES, output_format)
        path = self.exporter.save(artifact, config.get_export_dir())
        if artifact.fallback:
            print("ZIP export failed, wrote JSON instead")
        return str(path)

    def get_system_status(self) -> Dict[str, Any]:
        """Get system status"""
        return {
            'system': {
                'status': 'running' if self.is_running else 'stopped',
                'uptime': self._start_time.isoformat() if self._start_time else None,
                'version': config.get('app.version')
            },
            'floats': {
                'count': len(self.registry) if self.registry else 0,
                'selected': self.registry.selected_float if self.registry else None
            },
            'chat': {
                'messages': len(self.transcript.messages) if self.transcript else 0,
                'reply_delay_seconds': config.get_reply_delay()
            },
            'profiles': sorted(PROFILES)
        }

    def run_interactive_mode(self):
        """Run interactive command-line mode"""
        self.is_running = True
        self._start_time = datetime.now()

        print("=== FloatChat - Interactive Mode ===")
        print("Commands: status, query <text>, floats, select <id>, export [json|zip], exit")

        while self.is_running:
            try:
                command = input("\nfloatchat> ").strip().split()
                if not command:
                    continue

                cmd = command[0].lower()

                if cmd == 'exit':
                    break
                elif cmd == 'status':
                    status = self.get_system_status()
                    print(f"System Status: {status['system']['status']}")
                    print(f"Floats: {status['floats']}")
                elif cmd == 'query' and len(command) > 1:
                    for message in self.execute_query(' '.join(command[1:])):
                        print(format_message(message))
                elif cmd == 'floats':
                    print(self.registry.to_dataframe().to_string(index=False))
                elif cmd == 'select' and len(command) > 1:
                    print(f"Selected float: {self.registry.select_float(command[1])}")
                elif cmd == 'export':
                    output_format = command[1] if len(command) > 1 else 'json'
                    print(f"Exported to {self.export_data(output_format)}")
                else:
                    print("Unknown command")

            except KeyboardInterrupt:
                break
            except ValueError as e:
                print(f"Error: {e}")

        self.shutdown()

    def _signal_handler(self, signum, frame):
        """Handle shutdown signals gracefully"""
        logger.info(f"Received signal {signum}, shutting down...")
        self.shutdown()

    def shutdown(self):
        """Shutdown system gracefully"""
        if self.transcript and not self.transcript.closed:
            self.transcript.close()
        self.is_running = False
        logger.info("FloatChat shutdown complete")


def format_message(message: Message) -> str:
    """Plain-text rendering of a chat message for the terminal"""
    prefix = "you" if message.sender is Sender.USER else "assistant"
    lines = [f"[{prefix}] {message.content}"]

    if message.kind is MessageKind.TABLE:
        for row in message.payload.rows:
            lines.append(f"    {row.depth:>8}  {row.value}")
    elif message.kind is MessageKind.CHART:
        points = ", ".join(f"{point.depth:g}m={point.value:g}" for point in message.payload.points)
        lines.append(f"    {points}")
    elif message.kind is MessageKind.METADATA:
        for key, value in message.payload.fields.items():
            lines.append(f"    {key}: {value}")
    elif message.kind is MessageKind.DOWNLOAD:
        lines.append(f"    {message.payload.filename} ({len(message.payload.data)} bytes)")

    return "\n".join(lines)


def main(argv: Optional[List[str]] = None):
    """Main entry point with command-line interface"""
    parser = argparse.ArgumentParser(description='FloatChat ARGO data explorer')
    parser.add_argument('--query', help='Run a single chat query')
    parser.add_argument('--export', choices=['json', 'zip'], help='Export mock data')
    parser.add_argument('--interactive', action='store_true', help='Run interactive mode')
    parser.add_argument('--config', help='Path to configuration file')

    args = parser.parse_args(argv)

    # Load configuration
    if args.config:
        config.load_config(args.config)

    system = FloatChatSystem()

    if not system.initialize_system():
        print("System initialization failed. Check logs for details.")
        return 1

    try:
        if args.query:
            for message in system.execute_query(args.query):
                print(format_message(message))
            return 0

        if args.export:
            print(f"Exported to {system.export_data(args.export)}")
            return 0

        # Default: run interactive mode
        system.run_interactive_mode()
        return 0

    finally:
        system.shutdown()


if __name__ == "__main__":
    sys.exit(main())
