"""State modules for tax year 2025. Tax year 2026 reuses them unchanged."""

from calculator.state.configs.state_2025 import ca, ct, il, ma, md, nj, oh, pa, sc, ut, wi
from calculator.state.configs.state_2025.configured import FACTORIES as CONFIGURED_FACTORIES

STATE_FACTORIES = [
    ca.build,
    ct.build,
    il.build,
    ma.build,
    md.build,
    nj.build,
    oh.build,
    pa.build,
    sc.build,
    ut.build,
    wi.build,
] + CONFIGURED_FACTORIES

__all__ = ["STATE_FACTORIES"]
