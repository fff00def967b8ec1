"""Engine — provisioning context and the sequencer loop."""
