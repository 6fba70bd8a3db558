"""
Error taxonomy shared by the verifier, the extractor and the adapters.

Services raise these; adapters translate them (native abort codes, HTTP
status codes). Only `ResourceLimitExceeded` and `ChallengeTooShort` are ever
visible to callers of the two public operations.
"""


class VDFGatewayError(Exception):
    pass


class ResourceLimitExceeded(VDFGatewayError, ValueError):
    """A security or difficulty parameter is above its hard ceiling."""

    def __init__(self, parameter: str, value: int, limit: int):
        super().__init__(f"{parameter} {value} exceeds maximum of {limit}")
        self.parameter = parameter
        self.value = value
        self.limit = limit


class ChallengeTooShort(VDFGatewayError, IndexError):
    """The challenge does not contain a full authentication-key region."""

    def __init__(self, length: int, required: int):
        super().__init__(f"Challenge must be at least {required} bytes, got {length}")
        self.length = length
        self.required = required


class InvalidProof(VDFGatewayError):
    pass


class InvalidIterations(VDFGatewayError, ValueError):
    pass


class NativeArgumentError(VDFGatewayError, TypeError):
    pass
