"""
Sub-package Documentation
==========================

Types of Output Files
------------------------

+--------------------------------+------------------+------------------------------------------+
| expected name/suffix           | file type/format | content                                  |
+================================+==================+==========================================+
| ``annotations.tab``            | text/tabbed      | resolved annotations, one row each       |
+--------------------------------+------------------+------------------------------------------+
| ``TXANNO.COMPLETE``            | text             | completion stamp with the run time       |
+--------------------------------+------------------+------------------------------------------+

Algorithm Overview
----------------------

- read in the variants and trim the alleles to their minimal representation
- find the transcripts within range of each variant
- classify the variant against each transcript (exonic, splicing, UTR, intronic, upstream, downstream)
- 3' normalize indels and generate the coding and protein notation for each transcript
- collect the per-transcript candidates and resolve the single most informative annotation
  by precedence (exonic > ncRNA exonic > UTR5 > UTR3 > intronic > ncRNA intronic > upstream >
  downstream > intergenic > error)
"""
