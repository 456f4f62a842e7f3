"""Cross-cutting helpers shared by all layers (enums, logging, utils)."""
