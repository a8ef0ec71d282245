"""ReplayBridge - vMix replay highlight tagging and reel control bridge."""
