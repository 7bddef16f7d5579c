"""
Configuration for the agents + edges risk calculator.

Model constants are fixed; they are not fitted and not user-editable.
"""

# Model constants
R0 = 1.0
LOAD_L = 1.3
ALPHA = 0.3
GAMMA = 0.12

# Parameter domains
N_MIN = 1
N_MAX = 200
AUTONOMY_MIN = 1
AUTONOMY_MAX = 10
K_MIN = 0

# Defaults (share URL fallback values)
DEFAULT_N = 30
DEFAULT_AUTONOMY = 5
DEFAULT_K = 3
DEFAULT_TOPOLOGY = "bounded"

# Topology codes -> display labels (order is the display order)
TOPOLOGY_LABELS = {
    "bounded": "Bounded degree (k)",
    "mesh": "Full mesh",
    "hub": "Hub-and-spoke",
    "pipeline": "Pipeline",
}

# Scenario list caps
MAX_COMPARE = 8
MAX_SAVED = 20

# Persistence / export
SAVED_KEY = "agents_edges_saved_scenarios_v1"
CSV_FILENAME = "emergence-risk-calculator.csv"
SHARE_BASE_URL = "http://localhost/"

# Sweep ranges
SWEEP_AUTONOMY_VALUES = [1, 3, 5, 7, 10]
SWEEP_K_VALUES = [0, 1, 2, 3, 5, 8, 13]

# Chart
RISK_LABEL_HEIGHT = 0.65
BASELINE_COLOUR = "#0f172a"
