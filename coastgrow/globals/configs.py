#---------------------
# SPUR GROWTH
#---------------------
SPUR_MIN_LENGTH = 0
SPUR_MAX_LENGTH = 25          # exclusive
GATE_BASE = 100               # noise threshold at the spur base
GATE_RAMP = 155               # threshold rise from base to tip
GROWTH_BATCH_SIZE = 16384     # points per vectorized growth batch

#---------------------
# NOISE FIELD
#---------------------
NOISE_SCALE = 1.0
NOISE_PERSISTENCE = 1 / 1.5
NOISE_LACUNARITY = 15.0
NOISE_OCTAVES = 2
NOISE_SEED = 10

#---------------------
# MORPHOLOGY
#---------------------
ERODE_PASSES = 3

#---------------------
# TERRAIN PALETTE
#---------------------
LAND_COLOR = "#1A662A"
SAND_COLOR = "#FADB75"
WATER_COLOR = "#120052"

OUTPUT_MODES = ("colorize", "binary")

#---------------------
# CONFIGURATION FILES
#---------------------
GROW_CONFIGS_NAME = "grow_configs.yml"

#--------------------
# Step export suffixes
#--------------------
GROWN_STEP_SUFFIX = "_grown"
DILATED_STEP_SUFFIX = "_dilated"
ERODED_STEP_SUFFIX = "_eroded"
NOISE_STEP_SUFFIX = "_noise"
