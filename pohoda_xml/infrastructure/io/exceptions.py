class PohodaInfrastructureError(Exception):
    pass


class DataStreamError(PohodaInfrastructureError):
    pass


class StreamOpenError(DataStreamError):
    pass


class StreamWriteError(DataStreamError):
    pass


class MalformedFragmentError(DataStreamError):
    pass


class DocumentStateError(RuntimeError):
    pass
