# --- src/resnet_core/constants.py ---
import logging

logger = logging.getLogger(__name__)

# --- Numerical Constants for Solving ---

#: Tolerance on the sum of outgoing currents at a node for the KCL check of a solved network.
KCL_TOLERANCE_AMPS: float = 1.0e-7

#: Tolerance on the per-node sum of neighbour voltage deltas for the voltage-consistency check.
VOLTAGE_CONSISTENCY_TOLERANCE_VOLTS: float = 1.0e-7

# --- Solver Defaults ---

DEFAULT_RELAXATION_ITERATIONS: int = 1000
DEFAULT_LEARNING_RATE: float = 0.001
DEFAULT_LOG_INTERVAL: int = 100

DEFAULT_INVERTER_MAX_ITERATIONS: int = 500
#: Frobenius norm of (A·X − I) at which the iterative inverse is accepted.
DEFAULT_INVERTER_TOLERANCE: float = 1.0e-9
#: Step factor of the fixed-point inverse recurrence X + damping·(I − A·X).
DEFAULT_INVERTER_DAMPING: float = 0.5

logger.debug("Defined core constants: KCL_TOLERANCE_AMPS, solver defaults")
