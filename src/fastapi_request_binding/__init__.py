"""FastAPI Request Binding - declarative request-to-object binding for FastAPI."""

from fastapi_request_binding._types import Decoder
from fastapi_request_binding.coercion import ValidationRule, coerce
from fastapi_request_binding.decoders import (
    DecoderRegistry,
    JSONDecoder,
    NoopDecoder,
    XMLDecoder,
)
from fastapi_request_binding.dependency import pick_dependency
from fastapi_request_binding.descriptor import (
    BindingDescriptor,
    FieldDescriptor,
    build_descriptor,
)
from fastapi_request_binding.exceptions import (
    BindingConfigurationError,
    PickError,
    PickException,
)
from fastapi_request_binding.kinds import (
    Complex64,
    Complex128,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    UInt,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
)
from fastapi_request_binding.markers import (
    Alias,
    FromForm,
    FromHeader,
    FromPath,
    FromQuery,
    MaxLength,
    Maximum,
    MinLength,
    Minimum,
)
from fastapi_request_binding.picker import Picker, default_picker
from fastapi_request_binding.readers import SourceKind
from fastapi_request_binding.setters import SetterRegistry
from fastapi_request_binding.trace import PickTrace, TraceEntry

__all__ = [
    "Alias",
    "BindingConfigurationError",
    "BindingDescriptor",
    "Complex128",
    "Complex64",
    "Decoder",
    "DecoderRegistry",
    "FieldDescriptor",
    "Float32",
    "Float64",
    "FromForm",
    "FromHeader",
    "FromPath",
    "FromQuery",
    "Int16",
    "Int32",
    "Int64",
    "Int8",
    "JSONDecoder",
    "Kind",
    "MaxLength",
    "Maximum",
    "MinLength",
    "Minimum",
    "NoopDecoder",
    "PickError",
    "PickException",
    "PickTrace",
    "Picker",
    "SetterRegistry",
    "SourceKind",
    "TraceEntry",
    "UInt",
    "UInt16",
    "UInt32",
    "UInt64",
    "UInt8",
    "ValidationRule",
    "XMLDecoder",
    "build_descriptor",
    "coerce",
    "default_picker",
    "pick_dependency",
]
