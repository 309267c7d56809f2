"""Sizing policy thresholds.

All values are in centimetres unless the name says otherwise. These encode
business policy and are tuned by hand, so keep them here rather than inline.
"""

CM_PER_INCH = 2.54

# Tops
TOP_FIT_HINT_SHIFT_CM = 2.5
TOP_LEEWAY_CM = 1.5
TOP_MODEL_SIMILARITY_CM = 5
TOP_TEXT_HEIGHT_VALIDATION_CM = 10
TOP_CHEST_SAFEGUARD_CM = 101
TOP_IDEAL_LENGTH_OVER_TORSO_CM = 20
TOP_LENGTH_NOTE_THRESHOLD_CM = 8

TOP_LEEWAY_CONFIDENCE = 0.95
TOP_TEXT_CHEST_CONFIDENCE = 0.85
TOP_TEXT_LENGTH_CONFIDENCE = 0.8
TOP_TEXT_CONFIDENCE = 0.7

# Shopper fit preference scale (1-10)
FIT_PREFERENCE_MIN = 1
FIT_PREFERENCE_MAX = 10
FIT_PREFERENCE_DEFAULT = 5
FIT_PREFERENCE_SLIM_MAX = 3
FIT_PREFERENCE_LOOSE_MIN = 7

# Bottoms: shared
BRAND_SHIFT_CM = 2
BELT_THRESHOLD_CM = 2
INSEAM_ANCHOR_CONFIRMED_CM = 1.5
INSEAM_ANCHOR_GOOD_CM = 3
ROW_INSEAM_HEMMING_CM = 4
ROW_INSEAM_SHORT_CM = -3
ROW_INSEAM_MAY_HEM_CM = 2

# Bottoms: W x L
WXL_EASE_CM = 2
WXL_BRAND_SHIFT_INCHES = 1
INSEAM_STEP_CM = 5.08
LENGTH_STEP_INCHES = 2
AGGRESSIVE_ROUNDING_STEPS = 1.3
INSEAM_PER_HEIGHT = 0.45
WXL_MAX_WAIST_DIFF_INCHES = 2
WXL_LOOSE_CONFIDENCE = 0.9

# Bottoms: model anchor
MODEL_ANCHOR_RELAXED_TOLERANCE_CM = 3.5
MODEL_ANCHOR_TOLERANCE_CM = 1.5
MODEL_ANCHOR_MIN_GAP_CM = -2
MODEL_ANCHOR_CONFIDENCE = 0.98

# Bottoms: text tier
TEXT_DUAL_MODEL_TALLER_CM = 6
TEXT_DUAL_INSEAM_LONGER_CM = 3
TEXT_SHORT_INSEAM_CM = -5
TEXT_LONG_INSEAM_CM = 8
TEXT_CONFIDENCE = 0.7
TEXT_DUAL_CONFIDENCE = 0.75

# Bottoms: fallbacks
UNIVERSAL_MAX_CONFIDENCE = 0.6
UNIVERSAL_HIP_TOLERANCE_CM = 5
EMERGENCY_TOLERANCE_INCHES = 1.5
EMERGENCY_CONFIDENCE = 0.75
NUMERIC_WAIST_MIN = 28
NUMERIC_WAIST_MAX = 42

# Shoes
SLIP_ON_ADJUSTMENT_CM = -0.3
SLIP_ON_MAX_BUFFER_CM = 0.2
SLIP_ON_WIDE_ADJUSTMENT_CM = 0.0
SLIP_ON_WIDE_MAX_BUFFER_CM = 0.3
LACED_ADJUSTMENT_CM = 0.0
LACED_MAX_BUFFER_CM = 0.4
LACED_MIN_BUFFER_CM = -0.2
LACELESS_BOOT_MIN_BUFFER_CM = -0.3
SLIP_ON_MIN_BUFFER_CM = -0.5
SHOE_RUNS_LARGE_SHIFT_CM = -0.3
SHOE_RUNS_SMALL_SHIFT_CM = 0.2
SHOE_BORDER_CASE_CM = 0.3
SHOE_SNUG_PREFERENCE_CM = 0.5
SHOE_EXPERT_OVERRIDE_CM = 1.0
SHOE_DUAL_MIN_GAP_CM = 0.5
SHOE_DUAL_MAX_GAP_CM = 1.2
SHOE_SIZE_TOLERANCE = 0.5
SHOE_SLIP_ON_CONFIDENCE = 0.9
SHOE_CONFIDENCE = 0.95
SHOE_CHART_CONFIDENCE = 0.8
SHOE_SIZE_NUMERIC_CONFIDENCE = 0.85

# Router
LENGTH_WARNING_CM = 6
UNKNOWN_CATEGORY_CONFIDENCE = 0.5
