"""
conclex - linguistic predictors of word concreteness.

Joins lexical resources (concreteness norms, part-of-speech norms, morpheme
segmentations, etymologies, countability classes, compound lists) into one
per-lemma feature table and fits the factor analyses and variance partition
over it.

Typical entry point is the pipeline module:

    from conclex.pipeline import run_pipeline
    result = run_pipeline(input_dir, output_dir)
"""

__version__ = "0.1.0"
