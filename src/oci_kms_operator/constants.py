"""Constants for the OCI KMS Operator."""

# API Group
API_GROUP = "kms.cloud37.dev"
API_VERSION = "v1alpha1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_PROVIDER = "Provider"
KIND_KEY_VERSION = "KeyVersion"

# Plurals
PLURAL_PROVIDERS = "providers"

# Annotations
ANNOTATION_IMPORT_ID = f"{API_GROUP}/import-id"

# Finalizers
FINALIZER = f"{API_GROUP}/finalizer"

# Controller name used in structured logs
CONTROLLER_NAME = "oci-kms-operator"

# Condition Types
COND_READY = "Ready"
COND_PROVIDER_NOT_READY = "ProviderNotReady"
COND_AUTH_VALID = "AuthValid"
COND_CREATION_FAILED = "CreationFailed"
COND_NOT_FOUND = "NotFound"
COND_DELETION_SCHEDULED = "DeletionScheduled"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_VALIDATE_SUCCEEDED = "ValidateSucceeded"
EVENT_REASON_VALIDATE_FAILED = "ValidateFailed"
EVENT_REASON_KEY_VERSION_CREATED = "KeyVersionCreated"
EVENT_REASON_KEY_VERSION_IMPORTED = "KeyVersionImported"
EVENT_REASON_KEY_VERSION_NOT_FOUND = "KeyVersionNotFound"
EVENT_REASON_KEY_VERSION_DELETION_SCHEDULED = "KeyVersionDeletionScheduled"
EVENT_REASON_KEY_VERSION_DELETION_SKIPPED = "KeyVersionDeletionSkipped"

# Mapping between KeyVersion status keys and local state field names
KEY_VERSION_STATUS_FIELDS = {
    "keyId": "key_id",
    "keyVersionId": "key_version_id",
    "managementEndpoint": "management_endpoint",
    "compartmentId": "compartment_id",
    "vaultId": "vault_id",
    "state": "state",
    "timeCreated": "time_created",
    "timeOfDeletion": "time_of_deletion",
}
