import os
import torch

DTYPE = torch.float64

DEFAULT_ACTIVATION = 'identity'
DEFAULT_INITIALIZATION = 'xavier'

# Set NEURALSCALAR_DETECT_CYCLES=0 to skip the re-entrancy check in evaluate().
DETECT_CYCLES = os.environ.get('NEURALSCALAR_DETECT_CYCLES', '1') != '0'

LOG_FORMAT = '%(asctime)s - %(name)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'
