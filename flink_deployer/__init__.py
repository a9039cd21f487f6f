"""Zero-downtime update tooling for Apache Flink jobs."""
