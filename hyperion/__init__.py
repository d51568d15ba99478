"""
Hyperion Bridge Package

Core imports are lazily loaded so that importing a single submodule does not
pull in the whole contract stack. For direct module access, import from
submodules:

    from hyperion.bridge import Hyperion, ValsetArgs
    from hyperion.evm import Chain
    from hyperion.crypto import PrivateKey
"""

__version__ = "0.1.0"


# Lazy imports to avoid loading everything at package import
def __getattr__(name):
    """Lazy module loading."""
    if name == 'Chain':
        from .evm import Chain
        return Chain
    elif name == 'Hyperion':
        from .bridge import Hyperion
        return Hyperion
    elif name == 'HyperionSubgraph':
        from .bridge import HyperionSubgraph
        return HyperionSubgraph
    elif name == 'ValsetArgs':
        from .bridge import ValsetArgs
        return ValsetArgs
    elif name == 'HyperionException':
        from .exceptions import HyperionException
        return HyperionException
    raise AttributeError(f"module 'hyperion' has no attribute {name!r}")

__all__ = ['Chain', 'Hyperion', 'HyperionSubgraph', 'ValsetArgs', 'HyperionException']
