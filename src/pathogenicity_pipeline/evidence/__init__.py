"""Evidence layers: in-silico predictor consensus and clinical databases."""
