from mazevo.genome.cell import Cell
from mazevo.genome.chromosome import Chromosome, pixel_stride
from mazevo.genome.gene import Gene
from mazevo.genome.path import Path

__all__ = ["Cell", "Chromosome", "Gene", "Path", "pixel_stride"]
