from paladin.logging.logger import make_logger, ColorfulFormatter, LOG_MODES


def get_logger(name="paladin", mode="rich", level="INFO"):
    # handlers are set up by the first call for a given name
    return make_logger(name, mode, level)
