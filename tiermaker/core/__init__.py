"""
Core module - Business logic for TierMaker

This module contains the ranking functionality organized by concern:
- ranking: state machine, undo history and reconciliation
- checkpoint: durable progress and recovery
- items: item source and result sink
- session: wiring of the above for one ranking run
"""
