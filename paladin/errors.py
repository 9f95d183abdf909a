class PaladinError(Exception):
    pass


class AcquisitionError(PaladinError):
    pass


class ReleaseError(PaladinError):
    pass


class ProtocolError(PaladinError):
    pass
