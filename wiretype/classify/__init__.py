"""Wire type classification for remote method signatures."""

from .classifier import WireTypeClassifier as WireTypeClassifier
from .classifier import classify as classify
from .classifier import type_name as type_name
from .methods import MethodMetadata as MethodMetadata
from .methods import MethodSignature as MethodSignature
from .methods import ParamSignature as ParamSignature
from .methods import method_signature as method_signature
from .methods import service_signatures as service_signatures
from .methods import is_visible as is_visible
from .methods import resolve_name as resolve_name
from .names import name_of as name_of
from .python import Int64 as Int64
from .python import Matrix as Matrix
from .python import StructLiteral as StructLiteral
from .python import descriptor_for as descriptor_for
from .types import *
