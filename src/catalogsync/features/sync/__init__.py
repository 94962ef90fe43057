"""Run orchestration: state machine, watermark handling and cancellation."""
