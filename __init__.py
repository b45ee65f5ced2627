"""Automated essay scoring from coherence, grammar and structure.

Pipeline
--------

1. The essay text is segmented into sentences and paragraphs (`preprocess`).
2. Coherence: sentences are embedded with a SentenceTransformer model and the
   cosine similarity of every adjacent pair is averaged (`coherence`).
3. Grammar: a fixed set of surface patterns is counted and long sentences are
   penalized (`grammar`).
4. Structure: the first, middle and last paragraphs are checked for introduction,
   topic-sentence and conclusion signals (`structure`).
5. The three sub-scores are weighted 0.4 / 0.3 / 0.3 into an overall score,
   rounded, and paired with templated feedback (`score`, `feedback`).

Model Lifecycle
---------------

The embedding model is loaded once per process by `score.initialize_model()`
(or `await score.ainitialize_model()`). Concurrent calls share a single load.
Scoring before the model is loaded raises `errors.ModelUnavailable`.

Environment Variables
---------------------

* `APP_ENV`: `dev` or `prod`; selects `<env>.env` and `envs/<env>.yaml`.
* `LOG_LEVEL`: overrides `app.log_level`.
* `EMBEDDING__MODEL_NAME`, `EMBEDDING__DEVICE`, `SCORING__...`: nested settings.

"""
