from .maybe_uniform import Interval, Sample, Uniform, MaybeUniform
from .normal import StandardNormal, STANDARD_NORMAL, pdf
