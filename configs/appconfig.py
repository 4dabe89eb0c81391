# Application Configuration
# Centralized configuration for ports, defaults and numeric tolerances


class AppConfig:
    """Centralized application configuration"""

    # Port Configuration
    BACKEND_PORT = 8021

    # Default mechanism shown when nothing has been edited yet
    DEFAULT_R1 = 300.0  # ground
    DEFAULT_R2 = 100.0  # crank
    DEFAULT_R3 = 300.0  # coupler
    DEFAULT_R4 = 200.0  # rocker
    DEFAULT_ASSEMBLY_MODE = "open"
    DEFAULT_THETA2 = 1.57  # ~90 deg

    # Slider ranges offered to editing controls (same units as the lengths)
    LENGTH_RANGES = {
        "r1": (50.0, 600.0),
        "r2": (10.0, 300.0),
        "r3": (10.0, 500.0),
        "r4": (10.0, 500.0),
    }
    # Animation speed in rad/s
    SPEED_RANGE = (0.1, 5.0)

    # Number of crank positions in a full-rotation sweep
    DEFAULT_N_STEPS = 360

    # How far |cos| may exceed 1 before a collinear extreme counts as unreachable
    REACH_TOL = 1e-9
    # Relative tolerance for s + l == p + q (change-point linkages)
    CHANGE_POINT_REL_TOL = 1e-9

    # Transmission angle quality bands, degrees
    TRANSMISSION_POOR_LOW = 30.0
    TRANSMISSION_POOR_HIGH = 150.0
    TRANSMISSION_OPTIMAL_LOW = 80.0
    TRANSMISSION_OPTIMAL_HIGH = 100.0

    @classmethod
    def get_defaults(cls):
        return {
            "r1": cls.DEFAULT_R1,
            "r2": cls.DEFAULT_R2,
            "r3": cls.DEFAULT_R3,
            "r4": cls.DEFAULT_R4,
            "assembly_mode": cls.DEFAULT_ASSEMBLY_MODE,
            "theta2": cls.DEFAULT_THETA2,
        }


# For backward compatibility and easy imports
BACKEND_PORT = AppConfig.BACKEND_PORT
DEFAULT_N_STEPS = AppConfig.DEFAULT_N_STEPS
REACH_TOL = AppConfig.REACH_TOL
CHANGE_POINT_REL_TOL = AppConfig.CHANGE_POINT_REL_TOL
