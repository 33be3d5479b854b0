from .decoder import DocumentError as DocumentError
from .decoder import decode_package as decode_package
from .frontend import ExportFileFrontEnd as ExportFileFrontEnd
from .frontend import ExporterFrontEnd as ExporterFrontEnd
from .frontend import FrontEndLoadError as FrontEndLoadError
from .frontend import SemanticFrontEnd as SemanticFrontEnd
from .model import PackageInfo as PackageInfo
