"""Core — models, configuration, sequencing engine and provisioning services."""
