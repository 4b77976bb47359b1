"""
Node System Metrics

Thin label-keyed wrapper around prometheus_client gauges describing node and
container resources, plus a counter of kernel feature transitions made by
node_system.features.

Dependencies:
    pip install prometheus_client

Usage:
    from node_system import metrics

    metrics.record_node_resource_allocatable('cpu', 'milli_core', 4000)
    text = generate_latest(metrics.REGISTRY)
"""

import logging
from typing import Dict, Optional
from prometheus_client import CollectorRegistry, Gauge, Counter

from node_system.config import get_node_name

logger = logging.getLogger(__name__)

SUBSYSTEM = 'node_system'

NODE_KEY = 'node'
RESOURCE_KEY = 'resource'
UNIT_KEY = 'unit'
PRIORITY_KEY = 'priority'
POD_UID = 'pod_uid'
POD_NAME = 'pod_name'
POD_NAMESPACE = 'pod_namespace'
CONTAINER_ID = 'container_id'
CONTAINER_NAME = 'container_name'
FEATURE_KEY = 'feature'
STATE_KEY = 'state'

CONTAINER_LABELS = [NODE_KEY, RESOURCE_KEY, UNIT_KEY, POD_UID, POD_NAME, POD_NAMESPACE, CONTAINER_ID, CONTAINER_NAME]

REGISTRY = CollectorRegistry()

NodeResourceAllocatable = Gauge(
    'node_resource_allocatable',
    'the node allocatable of resources',
    [NODE_KEY, RESOURCE_KEY, UNIT_KEY],
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)

NodeResourcePriorityReclaimable = Gauge(
    'node_priority_resource_reclaimable',
    'the node reclaimable of different priorities resources',
    [NODE_KEY, PRIORITY_KEY, RESOURCE_KEY, UNIT_KEY],
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)

NodeResourcePriorityReclaimableStatus = Gauge(
    'node_resource_priority_reclaimable_status',
    'status of node reclaimable of different priorities resources',
    [NODE_KEY, PRIORITY_KEY],
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)

ContainerResourceRequests = Gauge(
    'container_resource_requests',
    'the container requests of resources',
    CONTAINER_LABELS,
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)

ContainerResourceLimits = Gauge(
    'container_resource_limits',
    'the container limits of resources',
    CONTAINER_LABELS,
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)

KernelFeatureTransitions = Counter(
    'kernel_feature_transitions',
    'kernel feature sysctl writes changing the feature state',
    [NODE_KEY, FEATURE_KEY, STATE_KEY],
    subsystem=SUBSYSTEM,
    registry=REGISTRY
)


def _node_labels() -> Optional[Dict[str, str]]:
    node = get_node_name()
    if node is None:
        logger.debug("NODE_NAME not set, skipping metric")
        return None
    return {NODE_KEY: node}


def _container_labels(resource_name: str, unit: str, pod: Dict[str, str],
                      container: Dict[str, str]) -> Optional[Dict[str, str]]:
    labels = _node_labels()
    if labels is None:
        return None
    labels[RESOURCE_KEY] = resource_name
    labels[UNIT_KEY] = unit
    labels[POD_UID] = pod.get('uid', '')
    labels[POD_NAME] = pod.get('name', '')
    labels[POD_NAMESPACE] = pod.get('namespace', '')
    labels[CONTAINER_ID] = container.get('container_id', '')
    labels[CONTAINER_NAME] = container.get('name', '')
    return labels


def record_node_resource_allocatable(resource_name: str, unit: str, value: float):
    labels = _node_labels()
    if labels is None:
        return
    labels[RESOURCE_KEY] = resource_name
    labels[UNIT_KEY] = unit
    NodeResourceAllocatable.labels(**labels).set(value)


def record_node_resource_priority_reclaimable(resource_name: str, unit: str, priority: str, value: float):
    labels = _node_labels()
    if labels is None:
        return
    labels[PRIORITY_KEY] = priority
    labels[RESOURCE_KEY] = resource_name
    labels[UNIT_KEY] = unit
    NodeResourcePriorityReclaimable.labels(**labels).set(value)


def record_node_resource_priority_reclaimable_status(priority: str, value: float):
    labels = _node_labels()
    if labels is None:
        return
    labels[PRIORITY_KEY] = priority
    NodeResourcePriorityReclaimableStatus.labels(**labels).set(value)


def record_container_resource_requests(resource_name: str, unit: str, pod: Dict[str, str],
                                       container: Dict[str, str], value: float):
    """
    Record a container request.

    Args:
        pod: Pod identity with 'uid', 'name' and 'namespace'
        container: Container status with 'container_id' and 'name'
    """
    labels = _container_labels(resource_name, unit, pod, container)
    if labels is None:
        return
    ContainerResourceRequests.labels(**labels).set(value)


def reset_container_resource_requests():
    ContainerResourceRequests.clear()


def record_container_resource_limits(resource_name: str, unit: str, pod: Dict[str, str],
                                     container: Dict[str, str], value: float):
    labels = _container_labels(resource_name, unit, pod, container)
    if labels is None:
        return
    ContainerResourceLimits.labels(**labels).set(value)


def reset_container_resource_limits():
    ContainerResourceLimits.clear()


def record_kernel_feature_transition(feature: str, enabled: bool):
    labels = _node_labels()
    if labels is None:
        return
    labels[FEATURE_KEY] = feature
    labels[STATE_KEY] = 'enabled' if enabled else 'disabled'
    KernelFeatureTransitions.labels(**labels).inc()
