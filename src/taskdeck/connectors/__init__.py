"""Front-end connectors. Only the interactive console for now."""
