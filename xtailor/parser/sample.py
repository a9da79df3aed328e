"""Tailoring document loaded when no other file was provided."""

SAMPLE_XML = """<?xml version='1.0' encoding='UTF-8'?>
<Tailoring xmlns="http://checklists.nist.gov/xccdf/1.2" id="xccdf_scap-workbench_tailoring_default">
  <benchmark href="/usr/share/usg-benchmarks/ubuntu2204_CIS_1"/>
  <version time="2025-10-10T08:37:35+00:00">1</version>
  <Profile id="xccdf_org.ssgproject.content_profile_cis_level2_server_customized" extends="xccdf_org.ssgproject.content_profile_cis_level2_server">
    <title xmlns:xhtml="http://www.w3.org/1999/xhtml" xml:lang="en-US" override="true">CIS Ubuntu 22.04 Level 2 Server Benchmark [CUSTOMIZED]</title>
    <description xmlns:xhtml="http://www.w3.org/1999/xhtml" xml:lang="en-US" override="true">This baseline aligns to the Center for Internet Security Ubuntu 22.04 LTS Benchmark, v1.0.0, released 08-30-2022.</description>
    <!--1.1.1.1: Ensure mounting of cramfs filesystems is disabled (Automated)-->
    <select idref="xccdf_org.ssgproject.content_rule_kernel_module_cramfs_disabled" selected="true"/>
    <refine-rule idref="xccdf_org.ssgproject.content_rule_kernel_module_cramfs_disabled" severity="high"/>
    <!--1.1.1.2: Ensure mounting of squashfs filesystems is disabled (Automated)-->
    <select idref="xccdf_org.ssgproject.content_rule_kernel_module_squashfs_disabled" selected="true"/>
    <!--1.6.1.3: Ensure all AppArmor Profiles are in enforce or complain mode (Automated)-->
    <set-value idref="xccdf_org.ssgproject.content_value_var_apparmor_mode">enforce</set-value>
  </Profile>
</Tailoring>"""  # noqa: E501
