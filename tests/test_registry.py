"""
Tests for the logger registry and configuration store.
"""

from concurrent.futures import ThreadPoolExecutor

from brisk_log import (
    GLOBAL_NAMESPACE,
    GLOBAL_REGION,
    ConfigurationStore,
    LoggerLevel,
    LoggerOption,
    Namespace,
    Region,
)


class TestConfigurationStore:
    """Test namespace default records."""

    def test_unseen_namespace_gets_global_default(self):
        """First read inserts the global default."""
        store = ConfigurationStore()
        namespace = Namespace("fresh")

        assert namespace not in store
        option = store.get_configuration(namespace)

        assert option == store.global_default
        assert namespace in store

    def test_default_namespace(self):
        """Omitting the namespace reads the global namespace."""
        store = ConfigurationStore()

        store.get_configuration()

        assert store.namespaces() == [GLOBAL_NAMESPACE]

    def test_update_merges_present_fields(self):
        """Updates overwrite present fields and keep the rest."""
        store = ConfigurationStore()
        namespace = Namespace("svc")
        store.update(LoggerOption(level="warn"), namespace)

        option = store.update(LoggerOption(enable_file=True), namespace)

        assert option.level is LoggerLevel.warn
        assert option.enable_file is True
        assert store.get_configuration(namespace) is option

    def test_update_does_not_touch_other_namespaces(self):
        """Each namespace has its own record."""
        store = ConfigurationStore()
        first, second = Namespace("a"), Namespace("b")

        store.update(LoggerOption(level="error"), first)

        assert store.get_configuration(second).level is LoggerLevel.debug
        assert store.global_default.level is LoggerLevel.debug


class TestGetLogger:
    """Test identity caching."""

    def test_same_pair_same_instance(self, registry, mock_sink):
        """A (region, namespace) pair always maps to one object."""
        region, namespace = Region("r"), Namespace("n")

        assert registry.get_logger(region, namespace) is registry.get_logger(region, namespace)

    def test_global_logger(self, registry, mock_sink):
        """No arguments yield the global logger, every time."""
        logger = registry.get_logger()

        assert logger.region is GLOBAL_REGION
        assert logger.namespace is GLOBAL_NAMESPACE
        assert logger.region.description == "global"
        assert logger.namespace.description == "global"
        assert registry.get_logger() is logger

    def test_distinct_tokens_distinct_instances(self, registry, mock_sink):
        """Regions with equal text are still different loggers."""
        first = registry.get_logger(Region("api"))
        second = registry.get_logger(Region("api"))

        assert first is not second

    def test_hit_does_not_reapply_configuration(self, registry, mock_sink):
        """Fetching a cached logger keeps its instance-level configuration."""
        logger = registry.get_logger()
        logger.configure(level="error")

        assert registry.get_logger().option.level is LoggerLevel.error

    def test_concurrent_get_creates_one_instance(self, registry, mock_sink):
        """Racing lookups for one key return a single instance."""
        region, namespace = Region("hot"), Namespace("hot")

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda _: registry.get_logger(region, namespace), range(64)))

        assert all(result is results[0] for result in results)
        assert len(registry.loggers(namespace)) == 1

    def test_concurrent_configure_and_get_agree(self, registry, mock_sink):
        """Loggers created during a namespace configure end up on its default."""
        namespace = Namespace("race")
        levels = ["info", "warn", "error", "debug"]

        def reconfigure(round_: int) -> None:
            registry.configure(level=levels[round_ % len(levels)], namespace=namespace)

        def fetch(index: int) -> None:
            registry.get_logger(Region(f"r{index}"), namespace)

        with ThreadPoolExecutor(max_workers=8) as pool:
            futures = []
            for i in range(200):
                futures.append(pool.submit(fetch, i))
                if i % 5 == 0:
                    futures.append(pool.submit(reconfigure, i // 5))
            for future in futures:
                future.result()

        default = registry.store.get_configuration(namespace)
        instances = registry.loggers(namespace)
        assert len(instances) == 200
        assert all(instance.option == default for instance in instances)


class TestNamespaceConfigure:
    """Test namespace-level configuration and propagation."""

    def test_namespace_sharing(self, registry, mock_sink):
        """Existing and later loggers of a namespace share its configuration."""
        namespace = Namespace("test")
        logger = registry.get_logger(Region("region1"), namespace)

        registry.configure({"level": LoggerLevel.info, "enable_file": True}, namespace)
        logger2 = registry.get_logger(Region("region2"), namespace)

        assert logger.namespace is logger2.namespace
        assert logger.option.level is LoggerLevel.info
        assert logger2.option.level is LoggerLevel.info
        assert logger.option.enable_file is True
        assert logger2.option.enable_file is True

    def test_instance_isolation(self, registry, mock_sink):
        """Instance configure leaves siblings and the namespace default alone."""
        namespace = Namespace("test")
        registry.configure(level=LoggerLevel.info, enable_file=True, namespace=namespace)
        logger = registry.get_logger(Region("region1"), namespace)
        logger2 = registry.get_logger(Region("region2"), namespace)

        logger2.configure(level=LoggerLevel.error)
        logger3 = registry.get_logger(Region("region3"), namespace)

        assert logger.option.level is LoggerLevel.info
        assert logger2.option.level is LoggerLevel.error
        assert logger3.option.level is LoggerLevel.info
        assert registry.store.get_configuration(namespace).level is LoggerLevel.info

    def test_global_configure(self, registry, mock_sink):
        """Configure without namespace changes the global namespace."""
        logger = registry.get_logger()

        registry.configure(level=LoggerLevel.error)
        logger2 = registry.get_logger()

        assert logger.option.level is LoggerLevel.error
        assert logger2.option.level is LoggerLevel.error
        assert registry.store.get_configuration(GLOBAL_NAMESPACE).level is LoggerLevel.error

    def test_namespace_configure_discards_instance_overrides(self, registry, mock_sink):
        """Namespace reconfiguration is authoritative over instance overrides."""
        namespace = Namespace("svc")
        logger = registry.get_logger(Region("r"), namespace)
        logger.configure(level="error", enable_console=False)

        registry.configure(enable_file=True, namespace=namespace)

        assert logger.option.level is LoggerLevel.debug
        assert logger.option.enable_console is True
        assert logger.option.enable_file is True

    def test_other_namespaces_untouched(self, registry, mock_sink):
        """Propagation stays inside the configured namespace."""
        outsider = registry.get_logger(Region("r"), Namespace("other"))

        registry.configure(level="warn", namespace=Namespace("target"))

        assert outsider.option.level is LoggerLevel.debug

    def test_incremental_namespace_configure(self, registry, mock_sink):
        """Successive namespace patches accumulate."""
        namespace = Namespace("svc")
        registry.configure(level="warn", namespace=namespace)

        merged = registry.configure(file_path="/tmp/svc", namespace=namespace)

        assert merged.level is LoggerLevel.warn
        assert merged.file_path == "/tmp/svc"

    def test_instance_configure_resets_from_global_default(self, registry, mock_sink):
        """Instance configure starts from the global default, not the namespace one."""
        namespace = Namespace("svc")
        registry.configure(level="info", file_path="/tmp/svc", namespace=namespace)
        logger = registry.get_logger(Region("r"), namespace)

        logger.configure(enable_console=False)

        assert logger.option.level is LoggerLevel.debug
        assert logger.option.file_path == "logs"
        assert logger.option.enable_console is False

    def test_loggers_snapshot(self, registry, mock_sink):
        """loggers() lists cached instances."""
        namespace = Namespace("svc")
        registry.get_logger(Region("a"), namespace)
        registry.get_logger(Region("b"), namespace)
        registry.get_logger()

        assert len(registry.loggers(namespace)) == 2
        assert len(registry.loggers()) == 3
