from paladin.config.config import PaladinConfig, resolve_signal
